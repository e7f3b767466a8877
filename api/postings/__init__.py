"""
Postings: open positions offered by an organization.
"""
