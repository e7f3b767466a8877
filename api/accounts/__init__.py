"""
Accounts: users of the job board and their applications.
"""
