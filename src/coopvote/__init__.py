"""Cooperative assembly attendance and voting platform.

The package is organized by feature modules (members, attendance, positions,
candidates, voting, ...). Each module keeps a thin Flask controller layer on
top of service and repository layers.
"""
