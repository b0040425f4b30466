from typing import Any, Dict, List

# Starting catalog used when no data file exists yet. Ids are assigned by the store.

SEED_PRODUCTS: List[Dict[str, Any]] = [
    {
        "name": "Smartphone XYZ Pro",
        "category": "Smartphones",
        "description": '6.7" display, 128 GB storage, triple 50 MP camera, A16 processor',
        "price": 49990,
        "stock": 15,
        "rating": 4.8,
        "image": "/images/product-1.jpg",
    },
    {
        "name": "UltraBook Laptop",
        "category": "Laptops",
        "description": '15.6" screen, 512GB SSD, 16GB RAM, Intel Core i7, RTX 3060',
        "price": 89990,
        "stock": 8,
        "rating": 4.9,
        "image": "/images/product-2.jpg",
    },
    {
        "name": "AirSound Pro Headphones",
        "category": "Audio",
        "description": "Wireless, active noise cancelling, 30 hours of playback",
        "price": 12990,
        "stock": 25,
        "rating": 4.7,
        "image": "/images/product-3.jpg",
    },
    {
        "name": "TabPro 11 Tablet",
        "category": "Tablets",
        "description": '11" screen, stylus included, 128GB, Wi-Fi',
        "price": 34990,
        "stock": 12,
        "rating": 4.6,
        "image": "/images/product-4.jpg",
    },
    {
        "name": "Watch X Smartwatch",
        "category": "Accessories",
        "description": "Health tracking, GPS, heart-rate monitor, 7 days of battery",
        "price": 15990,
        "stock": 20,
        "rating": 4.5,
        "image": "/images/product-5.jpg",
    },
    {
        "name": "GameBox Console",
        "category": "Games",
        "description": "1TB SSD, two controllers, 4K support",
        "price": 45990,
        "stock": 5,
        "rating": 4.9,
        "image": "/images/product-6.jpg",
    },
    {
        "name": 'UltraWide 34" Monitor',
        "category": "Monitors",
        "description": '34" curved, 144Hz, 1ms, HDR400',
        "price": 39990,
        "stock": 7,
        "rating": 4.8,
        "image": "/images/product-7.jpg",
    },
    {
        "name": "Mechanical Pro Keyboard",
        "category": "Peripherals",
        "description": "Mechanical, RGB backlight, Cherry MX switches",
        "price": 6990,
        "stock": 30,
        "rating": 4.7,
        "image": "/images/product-8.jpg",
    },
    {
        "name": "Gaming X Mouse",
        "category": "Peripherals",
        "description": "16000 DPI, 8 programmable buttons, RGB",
        "price": 3990,
        "stock": 40,
        "rating": 4.6,
        "image": "/images/product-9.jpg",
    },
    {
        "name": "External Drive 2TB",
        "category": "Storage",
        "description": "External SSD, USB-C, 1000MB/s read speed",
        "price": 8990,
        "stock": 18,
        "rating": 4.5,
        "image": "/images/product-10.jpg",
    },
]
