"""
Organizations: companies that publish postings.
"""
