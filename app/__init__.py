"""Task assignment service with realtime notifications.

The local ``app`` package is a regular package so it takes precedence over
similarly named distributions installed in the environment.
"""
