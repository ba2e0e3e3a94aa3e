"""Products API"""
