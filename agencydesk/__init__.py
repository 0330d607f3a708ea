"""AgencyDesk API - IT management backend for agencies"""
