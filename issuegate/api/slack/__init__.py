"""Slack webhook resource for slash commands and interactive payloads.

Usage
-----
Import the resource for route registration::

    from issuegate.api.slack.resources import SlackWebhookResource
"""
