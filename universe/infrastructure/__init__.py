"""
Infrastructure Layer

Database adapters, schema and the PubChem compound directory client.
"""
