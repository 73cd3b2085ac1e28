"""Time Clock package.

Feature modules (timesheets, reports, users) each carry their own model,
repository, service and thin Flask controller layers.
"""
