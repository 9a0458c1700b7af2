"""Slack adapter built on slack-bolt.

Message events and slash commands become message-mode invocations; block
actions and view submissions are routed to the component dispatcher.
"""
