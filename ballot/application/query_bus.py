class QueryBus:
    def __init__(self):
        self.handlers = {}

    def register_handler(self, query_type, handler):
        self.handlers[query_type] = handler

    def handle(self, query):
        """Run ``query`` through the handler registered for its type."""
        handler = self.handlers.get(type(query))
        if handler is None:
            raise ValueError(f"No handler registered for query type: {type(query).__name__}")
        return handler.handle(query)
