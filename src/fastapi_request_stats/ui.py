"""Embedded UI markup served at the UI path."""

EMBEDDED_UI_MARKUP = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Request Stats</title>
  <link rel="stylesheet" href="dist/sws.css">
</head>
<body>
  <div id="sws-root"></div>
  <script src="dist/sws.js"></script>
</body>
</html>
"""
