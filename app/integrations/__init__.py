"""app.integrations — Outbound HTTP client modules.

All outbound HTTP calls go through a client in this package, never via bare
`requests` calls sprinkled across services or scripts:
  - Authenticated (token + tenant header injected by the client)
  - Fallback across a fixed list of base URLs
  - Errors surfaced as typed exceptions

Current clients:
  echo_client.EchoClient — Echo REST API
"""
