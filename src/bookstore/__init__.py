"""Bookstore microservices.

One package builds the five processes of the bookstore: a service per HTTP
verb on ``/api/books`` plus the server-rendered frontend, all sharing one
MongoDB collection.
"""

__version__ = "0.1.0"
