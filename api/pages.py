"""Fixed HTML served at the site root."""

INDEX_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>Service D</title>
    <link rel='stylesheet' href='/style.css'>
</head>
<body>
    <h1>Hello from Service D!</h1>
</body>
</html>"""
