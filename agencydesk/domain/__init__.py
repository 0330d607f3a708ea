"""Domain packages: one per business area"""
