# SalesGrid - Mercado Libre sales report service
