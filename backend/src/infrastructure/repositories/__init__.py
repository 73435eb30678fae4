"""Repositories over the relational record store"""
