"""
Infrastructure Layer

Outbound HTTP: the shared BaseAPIClient, content scanners, and the Gemini
text-generation client.
"""
