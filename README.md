# hotcoffee

A small coffee shop management service. It stores the menu, the ingredient
inventory and customer orders as JSON files in a data directory. It serves
them through a JSON HTTP API. The API is a WSGI application, and the command
runs it on the standard library's `wsgiref` server.

The package has no dependencies outside the standard library.

## Running

```
hot-coffee [--port N] [--dir S]
hot-coffee --help
```

- `--port N`: the port to listen on. The default is `7070`.
- `--dir S`: the data directory. The default is `data`.
- `--help`: print the usage text and exit.

Each option may also be written with a single dash, for example `-port 8080`.
If the port is not a number from 0 to 65535, or the server cannot bind to it,
the command prints an error and exits with status 1. Stop the server with
Ctrl-C.

On start the command creates the data directory if it is missing. It also
creates any of these files that do not exist yet:

- `menu.json`, `inventory.json` and `orders.json`, each holding an empty list
- `report.log`

The service's log is appended to `report.log`, one line per entry, in the
form `time=... level=... msg="..."`.

## Endpoints

Menu:

- `POST /menu`: add a menu item. The reply is 201 on success and 500 with
  `Failed to add menu item` otherwise. A body that is not valid JSON is read
  as an empty item, which is then rejected.
- `GET /menu`, `GET /menu/{id}`
- `PUT /menu/{id}`: replace a menu item
- `DELETE /menu/{id}`: the reply is 204

Inventory:

- `POST /inventory`: add an ingredient. The reply is always 200 with an empty
  body, whether or not the ingredient was stored.
- `GET /inventory`, `GET /inventory/{id}`
- `PUT /inventory/{id}`: replace an ingredient. Its quantity is cut down to a
  whole number.
- `DELETE /inventory/{id}`: the reply is 204

Orders:

- `POST /orders`: create an order from `customer_name` and `items`. The order
  is checked against the menu and the current stock. It is stored with status
  `open`, a time-based `order_id` and an ISO 8601 `created_at`. The reply is
  201.
- `GET /orders`, `GET /orders/{id}`
- `PUT /orders/{id}`: replace an order
- `DELETE /orders/{id}`: the reply is 204
- `POST /orders/{id}/close`: close an open order. This takes its ingredients
  out of the inventory, and the remaining quantities are cut down to whole
  numbers. Closing an order that is already closed fails.

Reports:

- `GET /reports/total-sales`: the sum of price × quantity over the lines of
  closed orders, as a JSON number. A product's price is recorded when an order
  holding it is closed. The record is kept in memory only, so the total counts
  only products seen in orders closed since the server started.
- `GET /reports/popular-items`: the product that appears in the most lines of
  closed orders, as a JSON string. The reply is `""` if there is none.

Most failures come back as JSON of the form
`{"Error": "Menu item not found", "Status": 404}`. A failure of
`/reports/total-sales` comes back as plain text. An unknown path gives a 404.
A known path used with the wrong method gives a 405 with an `Allow` header.

## Example

A menu item:

```json
{
  "product_id": "latte",
  "name": "Caffe Latte",
  "description": "Espresso with steamed milk",
  "price": 3.5,
  "ingredients": [
    {"ingredient_id": "espresso_shot", "quantity": 1},
    {"ingredient_id": "milk", "quantity": 200}
  ]
}
```

An inventory item:

```json
{"ingredient_id": "milk", "name": "Milk", "quantity": 5000, "unit": "ml"}
```

An order request:

```json
{"customer_name": "Alice", "items": [{"product_id": "latte", "quantity": 2}]}
```

## Using it from Python

- `hotcoffee.server.build_app(data_dir)` prepares the data directory and
  returns a `CoffeeShopApp`. That is a WSGI application, and any WSGI server
  can host it.
- `hotcoffee.cli.main(argv=None)` parses the options, serves the application
  and returns the exit status.
- The services can be used without HTTP:
  - `hotcoffee.menu.MenuService`
  - `hotcoffee.inventory.InventoryService`
  - `hotcoffee.orders.OrderService`
  - `hotcoffee.reports.ReportsService`

  Each one works on a `hotcoffee.storage.JsonRepository`.
- `menu_repository`, `inventory_repository` and `order_repository` create a
  repository for a given file.
- The records are dataclasses in `hotcoffee.models`:
  - `MenuItem`
  - `InventoryItem`
  - `Order`
  - `OrderItem`
  - `CreateOrderRequest`

  Each has `from_dict` and `to_dict`.
- Failures raise `ValidationError` or `NotFoundError`, both subclasses of
  `ServiceError`.

## Limits

- There is no authentication.
- Files are not locked, so only one process should use a data directory at a
  time.
- Prices used for sales totals are not kept across restarts.

## Tests

```
pip install -e .[test]
pytest
```