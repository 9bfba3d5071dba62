"""AI Tools: text transformation for groupware text widgets."""
