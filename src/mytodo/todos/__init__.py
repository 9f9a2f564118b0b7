"""
Todo service: owner-scoped todo storage and the RPC endpoint that exposes it
to the gateway.
"""
