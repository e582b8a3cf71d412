"""SQLAlchemy models for organizations, IPs, ports, domains, tasks and vulnerabilities."""