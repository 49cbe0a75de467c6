"""spotiwire infrastructure layer - credentials, HTTP transport and CLI."""
