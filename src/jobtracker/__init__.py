"""Job Tracker — personal job application tracker API.

Users register, log in, and manage their own list of job applications.
Every job operation is scoped to the authenticated user.
"""

__version__ = "0.1.0"
