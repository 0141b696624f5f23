"""reference_data package"""
