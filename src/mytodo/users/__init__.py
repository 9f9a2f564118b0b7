"""
User service: account storage, password hashing and the RPC endpoint that
exposes them to the gateway.
"""
