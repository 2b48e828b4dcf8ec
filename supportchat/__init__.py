"""Support Chat Relay - streaming chat backend for the customer-support widget."""
