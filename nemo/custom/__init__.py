"""Local lookups: honeypots, QQwry and custom IP location, port services and CDN checks."""