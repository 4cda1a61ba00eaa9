"""Authentication"""
