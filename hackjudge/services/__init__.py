"""Scoring, aggregation, ranking and progress services"""
