"""AI Interview Coach: practice interviews with AI-generated questions and scored feedback."""
