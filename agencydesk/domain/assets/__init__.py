"""IT assets: lifecycle rules, CRUD and attachments"""
