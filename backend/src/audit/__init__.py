"""Audit trail of document lifecycle events"""
