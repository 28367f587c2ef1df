from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FingerprintEntry:
    name: str
    patterns: Tuple[re.Pattern[str], ...]


def _entry(name: str, *patterns: re.Pattern[str]) -> FingerprintEntry:
    return FingerprintEntry(name=name, patterns=tuple(patterns))


# PSP fingerprints. Order here is the report column order and the order of
# "Detected PSPs"; do not sort.
PSP_CATALOG: Tuple[FingerprintEntry, ...] = (
    _entry(
        "Stripe",
        re.compile(r"js\.stripe\.com", re.I),
        re.compile(r"stripe\.com/v[0-9]", re.I),
        re.compile(r"pk_(live|test)_[A-Za-z0-9]+"),
        re.compile(r"Stripe\s*\("),
        re.compile(r"stripe-js", re.I),
    ),
    _entry(
        "PayPal",
        re.compile(r"paypal\.com/sdk/js", re.I),
        re.compile(r"paypalobjects\.com", re.I),
        re.compile(r"paypal\.Buttons", re.I),
        re.compile(r"paypal-button", re.I),
    ),
    _entry(
        "Braintree",
        re.compile(r"js\.braintreegateway\.com", re.I),
        re.compile(r"braintree-web", re.I),
        re.compile(r"braintree\.client\.create", re.I),
        re.compile(r"braintreegateway\.com", re.I),
    ),
    _entry(
        "Square",
        re.compile(r"js\.squareup\.com", re.I),
        re.compile(r"squareupsandbox\.com", re.I),
        re.compile(r"web\.squarecdn\.com", re.I),
        re.compile(r"Square\.payments", re.I),
    ),
    _entry(
        "Adyen",
        re.compile(r"checkoutshopper.*adyen\.com", re.I),
        re.compile(r"adyen\.com/checkoutshopper", re.I),
        re.compile(r"AdyenCheckout", re.I),
        re.compile(r"adyen-checkout", re.I),
    ),
    _entry(
        "Checkout.com",
        re.compile(r"cdn\.checkout\.com", re.I),
        re.compile(r"checkout\.com/frames", re.I),
        re.compile(r"Frames\.init", re.I),
        re.compile(r"cko-frames", re.I),
    ),
    _entry(
        "SoftBank Payment",
        re.compile(r"sbpayment\.jp", re.I),
        re.compile(r"softbank-payment\.jp", re.I),
        re.compile(r"softbankpayment", re.I),
        re.compile(r"sbps-", re.I),
    ),
    _entry(
        "GMO Payment Gateway",
        re.compile(r"static\.mul-pay\.com", re.I),
        re.compile(r"p01\.mul-pay\.com", re.I),
        re.compile(r"mul-pay\.com", re.I),
        re.compile(r"gmopg", re.I),
    ),
    _entry(
        "GMO Epsilon",
        re.compile(r"epsilon\.jp", re.I),
        re.compile(r"epsilonjavascript", re.I),
        re.compile(r"trans\.epsilon\.jp", re.I),
    ),
    _entry(
        "DGFT (Digital Garage)",
        re.compile(r"dgft\.jp", re.I),
        re.compile(r"veritrans", re.I),
        re.compile(r"ks\.veritrans\.co\.jp", re.I),
        re.compile(r"token\.veritrans\.co\.jp", re.I),
    ),
    _entry(
        "Amazon Pay",
        re.compile(r"static-fe\.payments-amazon\.com", re.I),
        re.compile(r"payments\.amazon\.co\.jp", re.I),
        re.compile(r"amazon\.Pay\.renderButton", re.I),
        re.compile(r"OffAmazonPayments", re.I),
    ),
    _entry(
        "PAY.JP",
        re.compile(r"js\.pay\.jp", re.I),
        re.compile(r"api\.pay\.jp", re.I),
        re.compile(r"Payjp\s*\("),
    ),
    _entry(
        "KOMOJU",
        re.compile(r"multipay\.komoju\.com", re.I),
        re.compile(r"komoju\.com", re.I),
    ),
    _entry(
        "Paidy",
        re.compile(r"apps\.paidy\.com", re.I),
        re.compile(r"Paidy\.configure", re.I),
    ),
)


# E-commerce platforms. First match wins, so stronger / more specific markers
# come first (e.g. hosted Japanese carts before generic WordPress plugins).
PLATFORM_CATALOG: Tuple[FingerprintEntry, ...] = (
    _entry(
        "Shopify",
        re.compile(r"cdn\.shopify\.com", re.I),
        re.compile(r"myshopify\.com", re.I),
        re.compile(r"shopify-section", re.I),
        re.compile(r"Shopify\.theme", re.I),
        re.compile(r"ShopifyAnalytics", re.I),
    ),
    _entry(
        "MakeShop",
        re.compile(r"makeshop\.jp", re.I),
        re.compile(r"gigaplus\.makeshop", re.I),
        re.compile(r"/shopimages/", re.I),
    ),
    _entry(
        "Color Me Shop",
        re.compile(r"shop-pro\.jp", re.I),
        re.compile(r"colorme", re.I),
    ),
    _entry(
        "BASE",
        re.compile(r"thebase\.in", re.I),
        re.compile(r"base\.shop", re.I),
        re.compile(r"baseec-img-mng\.akamaized\.net", re.I),
    ),
    _entry(
        "STORES",
        re.compile(r"stores\.jp", re.I),
        re.compile(r"storesjp", re.I),
    ),
    _entry(
        "EC-CUBE",
        re.compile(r"ec-cube", re.I),
        re.compile(r"eccube", re.I),
    ),
    _entry(
        "futureshop",
        re.compile(r"future-shop\.jp", re.I),
        re.compile(r"futureshop", re.I),
    ),
    _entry(
        "ecforce",
        re.compile(r"ecforce", re.I),
    ),
    _entry(
        "WooCommerce",
        re.compile(r"wp-content/plugins/woocommerce", re.I),
        re.compile(r"woocommerce_params", re.I),
        re.compile(r"wc-cart-fragments", re.I),
        re.compile(r"woocommerce_items_in_cart", re.I),
    ),
    _entry(
        "Shopware",
        re.compile(r"/bundles/storefront", re.I),
        re.compile(r"data-plugin-version=[\"']shopware", re.I),
        re.compile(r"window\.shopware", re.I),
        re.compile(r"<meta[^>]+name=[\"']generator[\"'][^>]+content=[\"'][^\"']*shopware", re.I),
        re.compile(r"shopware\.php", re.I),
    ),
    _entry(
        "Magento",
        re.compile(r"/static/frontend/", re.I),
        re.compile(r"Magento_", re.I),
        re.compile(r"mage/cookies", re.I),
    ),
    _entry(
        "BigCommerce",
        re.compile(r"cdn\d*\.bigcommerce\.com", re.I),
        re.compile(r"stencil-utils", re.I),
    ),
    _entry(
        "Salesforce Commerce Cloud",
        re.compile(r"demandware\.(static|store|net)", re.I),
        re.compile(r"/on/demandware\.", re.I),
    ),
    _entry(
        "Wix",
        re.compile(r"static\.wixstatic\.com", re.I),
        re.compile(r"wix-stores", re.I),
    ),
    _entry(
        "Squarespace",
        re.compile(r"static1\.squarespace\.com", re.I),
        re.compile(r"Static\.SQUARESPACE_CONTEXT"),
    ),
)


# Conventional cart/checkout locations, probed in this order against the site origin.
CART_PATHS: Tuple[str, ...] = (
    "/cart",
    "/cart/",
    "/basket",
    "/checkout",
    "/checkout/cart",
    "/shop/cart",
    "/shop/basket.html",  # MakeShop
    "/p/cart",  # futureshop
    "/cart/index.php",  # EC-CUBE 2
    "/shopping/cart",
    "/cart.php",
)

CART_PAGE_RE = re.compile(
    r"cart|basket|bag|checkout|カート|買い物|お買い物かご|買い物かご|ショッピングカート|レジ|購入手続き",
    re.I,
)


def psp_names() -> Tuple[str, ...]:
    return tuple(e.name for e in PSP_CATALOG)
