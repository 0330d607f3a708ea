"""IT support tickets raised by employees"""
