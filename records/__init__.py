"""Staff accounts and patient records for the clinicdesk backend.

This app holds the models, the authentication and authorization layer,
the patient directory and the API routes built on top of them.
"""
