"""Prefect flows for scheduled syncs"""
