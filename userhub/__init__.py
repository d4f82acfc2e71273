"""userhub — user resource service with a signed request pipeline."""
