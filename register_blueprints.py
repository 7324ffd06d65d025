def register_blueprints(app):
    from modules.orders import orders_bp
    from modules.workers import workers_bp
    from modules.warehouse import warehouse_bp

    # Production
    app.register_blueprint(orders_bp)
    app.register_blueprint(workers_bp)

    # Warehouse
    app.register_blueprint(warehouse_bp)
