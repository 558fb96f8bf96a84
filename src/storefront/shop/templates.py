"""Kida templates for the reference storefront pages.

Pages render into ``<!--app-html-->`` of the document template, so these
are fragments, not full documents.
"""

from kida import DictLoader, Environment

_LAYOUT = """\
<div class="storefront">
  <header class="storefront-header">
    <a href="{{ base }}/">{{ shop_name }}</a>
  </header>
  <main>{% block content %}{% endblock %}</main>
</div>"""

_HOME = """\
{% extends "layout.html" %}
{% block content %}
<section class="product-list" data-total="{{ total }}">
  <p class="product-count">{{ total }} products</p>
  {% if products %}
  <ul>
    {% for card in products %}
    <li class="product-card" data-product-id="{{ card.product_id }}">
      <a href="{{ card.url }}"><img src="{{ card.image }}" alt="{{ card.title }}"></a>
      <h3>{{ card.title }}</h3>
      <p class="price">{{ card.price }}</p>
    </li>
    {% end %}
  </ul>
  {% else %}
  <p class="empty">No products found.</p>
  {% end %}
</section>
{% endblock %}"""

_PRODUCT = """\
{% extends "layout.html" %}
{% block content %}
<article class="product-detail" data-product-id="{{ product.product_id }}">
  <img src="{{ product.image }}" alt="{{ product.title }}">
  <h1>{{ product.title }}</h1>
  <p class="price">{{ product.price }}</p>
  <p class="mall">{{ product.mall }}</p>
</article>
{% if related %}
<section class="related-products">
  <h2>Related products</h2>
  <ul>
    {% for card in related %}
    <li><a href="{{ card.url }}">{{ card.title }}</a></li>
    {% end %}
  </ul>
</section>
{% end %}
{% endblock %}"""

_NOT_FOUND = """\
{% extends "layout.html" %}
{% block content %}
<section class="not-found">
  <h1>404</h1>
  <p>The page you are looking for does not exist.</p>
  <a href="{{ base }}/">Back to the shop</a>
</section>
{% endblock %}"""

TEMPLATES = {
    "layout.html": _LAYOUT,
    "home.html": _HOME,
    "product.html": _PRODUCT,
    "not_found.html": _NOT_FOUND,
}


def create_environment() -> Environment:
    """Kida environment over the in-memory page templates."""
    return Environment(loader=DictLoader(TEMPLATES), autoescape=True)
