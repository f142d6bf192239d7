"""
Tickets module for Ticket Desk
Ticket catalog, ticket store and the submission manager live in submodules
"""
