"""Background services"""
