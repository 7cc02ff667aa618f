"""Dockship - deploy a Dockerized app to a remote host behind Nginx."""

__version__ = "1.0.0"
