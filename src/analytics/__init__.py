"""
Portfolio Analytics - Core Module

Event store, session tags, aggregation, cross-tab sync and the public
service facade.
"""
