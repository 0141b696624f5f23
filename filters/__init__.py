"""filters package"""
