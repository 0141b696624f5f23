"""records package"""
