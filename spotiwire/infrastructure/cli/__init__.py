"""spotiwire command-line interface."""
