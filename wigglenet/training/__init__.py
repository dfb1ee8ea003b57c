"""Cost evaluation, training loops and run pipelines."""
