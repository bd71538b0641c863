"""Face scanning service: match detected faces against enrolled people."""
