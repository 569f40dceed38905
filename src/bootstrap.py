"""Composition root.

Builds every handler and adapter from ``Settings`` and wires them around the
repositories of the ``quickbite`` domain, which must already be initialized.
Handlers receive their repositories by injection; the FastAPI app keeps the
container on ``app.state`` and routes pull it from the request.
"""

from dataclasses import dataclass

from fastapi import Request

from customers.client.client import Client
from customers.client.management import ClientManagementHandler
from customers.client.repository import ClientRepository
from menu.product.catalog import MenuCatalog
from menu.product.management import ProductManagementHandler
from menu.product.product import Product
from menu.product.repository import ProductRepository
from ordering.order.creation import CreateOrderHandler
from ordering.order.lifecycle import OrderLifecycle
from ordering.order.management import OrderManagementHandler
from ordering.order.order import Order
from ordering.order.pricing import PricingEngine
from ordering.order.repository import OrderRepository
from payments.gateway import build_gateway
from payments.gateway.port import PaymentGateway
from payments.gateway.qr import QrEncoder, SvgQrEncoder
from payments.payment.initiation import PaymentOrchestrator
from payments.payment.payment import Payment
from payments.payment.policy import FailurePolicy, failure_policy
from payments.payment.repository import PaymentRepository
from payments.payment.webhook import WebhookReconciler
from shared.config import Settings
from shared.domain import quickbite
from shared.locks import KeyedLock


@dataclass
class Container:
    settings: Settings

    products: ProductRepository
    clients: ClientRepository
    orders: OrderRepository
    payments: PaymentRepository

    gateway: PaymentGateway
    encoder: QrEncoder
    pricing: PricingEngine
    lifecycle: OrderLifecycle
    failure_policy: FailurePolicy

    product_management: ProductManagementHandler
    client_management: ClientManagementHandler
    order_creation: CreateOrderHandler
    order_management: OrderManagementHandler
    payment_orchestrator: PaymentOrchestrator
    webhook_reconciler: WebhookReconciler


def build_container(
    settings: Settings,
    gateway: PaymentGateway | None = None,
    encoder: QrEncoder | None = None,
) -> Container:
    gateway = gateway or build_gateway(settings)
    encoder = encoder or SvgQrEncoder()

    with quickbite.domain_context():
        products = quickbite.repository_for(Product)
        clients = quickbite.repository_for(Client)
        orders = quickbite.repository_for(Order)
        payments = quickbite.repository_for(Payment)

    # One lock registry so staff updates and webhooks serialize on the same order
    lifecycle = OrderLifecycle(orders, KeyedLock())
    pricing = PricingEngine(MenuCatalog(products))
    policy = failure_policy(settings.payment_failure_policy, lifecycle)

    return Container(
        settings=settings,
        products=products,
        clients=clients,
        orders=orders,
        payments=payments,
        gateway=gateway,
        encoder=encoder,
        pricing=pricing,
        lifecycle=lifecycle,
        failure_policy=policy,
        product_management=ProductManagementHandler(products),
        client_management=ClientManagementHandler(clients),
        order_creation=CreateOrderHandler(orders, pricing, clients),
        order_management=OrderManagementHandler(orders, pricing, clients, lifecycle),
        payment_orchestrator=PaymentOrchestrator(orders, payments, gateway, encoder, lifecycle),
        webhook_reconciler=WebhookReconciler(
            orders,
            payments,
            gateway,
            lifecycle,
            failure_policy=policy,
            topics=settings.webhook_topics,
        ),
    )


def get_container(request: Request) -> Container:
    """FastAPI dependency returning the container the app was built with."""
    return request.app.state.container
