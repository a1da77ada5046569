"""Scheduled housekeeping jobs."""
