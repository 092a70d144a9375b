"""
Feed ingestion: message sources, redraw notification and the consumer
loop that drives parsing and series updates.
"""
