"""Domain scan results and DNS resolution."""