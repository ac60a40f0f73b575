"""
Metadata tool call and merge of its output.

- command.py: runs the external tool on one image
- parser.py: matches output lines against configured prefixes
- merge.py: writes matched values into the document and process properties
"""
