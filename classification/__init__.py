"""classification package"""
