"""Command line front end for validating and applying filter expressions."""
