"""
Sash coefficient resolution: grid lookup service and order-editor client.
"""
