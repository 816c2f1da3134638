"""
HTTP API for the storybook wizard.
"""
