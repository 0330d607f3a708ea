"""Item categories for IT assets"""
