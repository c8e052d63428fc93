"""App Django do Helpdesk: models, repositórios e API JSON."""
