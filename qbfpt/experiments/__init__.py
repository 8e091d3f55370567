"""Experiment harness: benchmark configurations, CLI runner and plots"""
